"""Data models for ecs-deploy."""
