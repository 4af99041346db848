"""Constants for the Redis activity stream."""

# Stream names
STREAM_MAIN = "olofalumni:events"

# Approximate cap on stream length (XADD MAXLEN ~)
STREAM_MAXLEN = 10000

# Event name constants
EVENT_USER_REGISTERED = "user.registered"
EVENT_USER_VERIFIED = "user.verified"
EVENT_POST_CREATED = "post.created"
EVENT_COMMENT_CREATED = "comment.created"
EVENT_PHOTO_SHARED = "photo.shared"
EVENT_MESSAGE_SENT = "message.sent"
EVENT_FEEDBACK_SUBMITTED = "feedback.submitted"
EVENT_USER_REPORTED = "user.reported"
