"""Command line interface for the ECS timeline builder."""
