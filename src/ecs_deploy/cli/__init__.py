"""Command-line interface for ecs-deploy."""
