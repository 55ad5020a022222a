"""
Live streaming domain logic.

Includes:
- live_domain: Live input creation and deletion.
- stream_domain: The stream records that own chat moderation and guest seats.
- live_models: Results returned to the broadcaster.
"""
