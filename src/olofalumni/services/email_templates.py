"""HTML email templates rendered with Jinja2."""

from jinja2 import DictLoader, Environment, StrictUndefined, select_autoescape

_LAYOUT = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; background-color: #1a1a1a; color: #ffffff; padding: 20px; border-radius: 10px;">
  <div style="text-align: center; margin-bottom: 30px;">
    <h1 style="color: #4f46e5; margin: 0;">{% block heading %}OLOF ALUMNI{% endblock %}</h1>
    <p style="color: #9ca3af; margin: 5px 0;">Our Lady of Fatima Secondary School</p>
  </div>
  {% block body %}{% endblock %}
  <div style="text-align: center; padding-top: 20px; border-top: 1px solid #374151;">
    <p style="color: #9ca3af; font-size: 12px; margin: 0;">OLOF Alumni Community</p>
  </div>
</div>
"""

_VERIFICATION = """\
{% extends "layout.html" %}
{% block body %}
<div style="background-color: #2d2d2d; padding: 25px; border-radius: 8px; margin-bottom: 20px;">
  <h2 style="color: #ffffff;">Hi {{ name }}!</h2>
  <p style="color: #d1d5db; line-height: 1.6;">
    Welcome to the OLOF Alumni Community! To complete your registration, verify
    your email address using the code below:
  </p>
  <div style="text-align: center; margin: 30px 0;">
    <span style="color: #ffffff; font-size: 36px; font-weight: bold; letter-spacing: 8px;">{{ code }}</span>
  </div>
  <p style="color: #9ca3af; font-size: 14px; text-align: center;">
    This code will expire in {{ ttl_minutes }} minutes for security reasons.
  </p>
</div>
<div style="background-color: #374151; padding: 20px; border-radius: 8px; margin-bottom: 20px;">
  <h3 style="color: #10b981;">What's Next?</h3>
  <ul style="color: #d1d5db; line-height: 1.6;">
    <li>Enter the verification code on the website</li>
    <li>Complete your profile setup</li>
    <li>Start connecting with fellow OLOF alumni</li>
  </ul>
</div>
{% endblock %}
"""

_WELCOME = """\
{% extends "layout.html" %}
{% block heading %}WELCOME TO OLOF ALUMNI!{% endblock %}
{% block body %}
<div style="background-color: #2d2d2d; padding: 25px; border-radius: 8px; margin-bottom: 20px;">
  <h2 style="color: #ffffff;">Congratulations {{ name }}!</h2>
  <p style="color: #d1d5db; line-height: 1.6;">
    Your email has been verified and you're now part of the OLOF Alumni Community!
  </p>
  <h3 style="color: #10b981;">What You Can Do Now:</h3>
  <ul style="color: #d1d5db; line-height: 1.6;">
    {% for area, description in features %}
    <li><strong>{{ area }}:</strong> {{ description }}</li>
    {% endfor %}
  </ul>
</div>
<div style="background-color: #374151; padding: 20px; border-radius: 8px; margin-bottom: 20px;">
  <h3 style="color: #fbbf24;">Community Guidelines:</h3>
  <ul style="color: #d1d5db; line-height: 1.6;">
    <li>Be respectful and supportive of fellow alumni</li>
    <li>Share positive experiences and achievements</li>
    <li>Keep the OLOF spirit alive in all interactions</li>
  </ul>
</div>
{% endblock %}
"""

_PASSWORD_RESET = """\
{% extends "layout.html" %}
{% block body %}
<div style="background-color: #2d2d2d; padding: 25px; border-radius: 8px; margin-bottom: 20px;">
  <h2 style="color: #ffffff;">Hi {{ name }},</h2>
  <p style="color: #d1d5db; line-height: 1.6;">
    We received a request to reset your password. Use this code to choose a new one:
  </p>
  <div style="text-align: center; margin: 30px 0;">
    <span style="color: #ffffff; font-size: 36px; font-weight: bold; letter-spacing: 8px;">{{ code }}</span>
  </div>
  <p style="color: #9ca3af; font-size: 14px; text-align: center;">
    The code expires in {{ ttl_minutes }} minutes. If you did not ask for a reset, ignore this email.
  </p>
</div>
{% endblock %}
"""

WELCOME_FEATURES = [
    ("Home", "Share posts, photos, and connect with classmates"),
    ("Database", "Browse and search for fellow alumni by year and clan"),
    ("Inbox", "Send private messages and start conversations"),
    ("Notifications", "Stay updated on community activities"),
    ("Gallery", "Share and view memorable moments"),
]

_env = Environment(
    loader=DictLoader({
        "layout.html": _LAYOUT,
        "verification.html": _VERIFICATION,
        "welcome.html": _WELCOME,
        "password_reset.html": _PASSWORD_RESET,
    }),
    autoescape=select_autoescape(["html"]),
    undefined=StrictUndefined,
)


def render(template_name: str, **context) -> str:
    """Render one of the registered templates."""
    return _env.get_template(template_name).render(**context)
