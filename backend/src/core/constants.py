"""Application constants and configuration values."""

# Retention
RETENTION_DAYS = 7
RETENTION_WINDOW_MS = RETENTION_DAYS * 24 * 60 * 60 * 1000

# Schedule: daily at 02:00 UTC (standard 5-field cron)
CLEANUP_CRON_EXPRESSION = "0 2 * * *"
CLEANUP_TIMEZONE = "UTC"
CLEANUP_JOB_ID = "delete_expired_posts"
CLEANUP_MISFIRE_GRACE_SECONDS = 3600  # Allow 1 hour grace time if the process was down

# Realtime Database layout
POSTS_COLLECTION = "posts"
POST_TIMESTAMP_FIELD = "timestamp"  # epoch milliseconds
POST_MEDIA_FIELD = "videoURL"

# Cloud Storage download URLs carry the object path after this marker
MEDIA_OBJECT_PATH_MARKER = "/o/"
