"""Shared utilities for ecs-deploy."""
