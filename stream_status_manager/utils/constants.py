"""Shared constants used across the application."""

# Status Document Constants
# -------------------------

ONLINE_MARKER_TEMPLATE = "🟢 | `{name}`"
"""Row marker for an entity that is currently live."""

OFFLINE_MARKER_TEMPLATE = "&nbsp; | `{name}`"
"""Row marker for an entity that is currently offline."""

DEFAULT_DOCUMENT_PATH = "index.md"
"""Default path of the status document inside the repository."""

# Repository Constants
# --------------------

DEFAULT_REPO_URL = "https://github.com/infosecstreams/infosecstreams.github.io"
"""Repository used when none is configured."""

DEFAULT_REMOTE_NAME = "origin"

COMMIT_AUTHOR_NAME = "🤖 STATUSS (Seriously Totally Automated Twitch Updating StreamStatus)"
COMMIT_AUTHOR_EMAIL = "goproslowyo+statuss@users.noreply.github.com"

ONLINE_COMMIT_MESSAGE_TEMPLATE = "🟢 {entity} has gone online! [no ci]"
OFFLINE_COMMIT_MESSAGE_TEMPLATE = "☠️  {entity} has gone offline! [no ci]"
"""Commit messages carry [no ci] so pushes do not trigger CI pipelines."""

# Webhook Constants
# -----------------

WEBHOOK_PATH = "/webhook/callbacks"
DEFAULT_PORT = 8080

MESSAGE_ID_HEADER = "Twitch-Eventsub-Message-Id"
MESSAGE_TIMESTAMP_HEADER = "Twitch-Eventsub-Message-Timestamp"
MESSAGE_SIGNATURE_HEADER = "Twitch-Eventsub-Message-Signature"
MESSAGE_TYPE_HEADER = "Twitch-Eventsub-Message-Type"
SUBSCRIPTION_TYPE_HEADER = "Twitch-Eventsub-Subscription-Type"

SIGNATURE_PREFIX = "sha256="

MESSAGE_TYPE_REVOCATION = "revocation"

STREAM_ONLINE_TYPE = "stream.online"
STREAM_OFFLINE_TYPE = "stream.offline"

DEFAULT_MAX_MESSAGE_AGE = 600
"""Notifications older than this many seconds are rejected as possible replays."""
