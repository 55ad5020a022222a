"""
Domain layer containing core business logic and domain services.

Submodules:
- live: Broadcast start/stop against the video platform.
- push: Device tokens, preferences and push delivery.
- appeals, comments, follow, notifications: Social and content-safety records.
- moderation, vip: Per-streamer moderation and premium badges.
- utils: Domain-specific utilities (e.g., ID generation).
"""
