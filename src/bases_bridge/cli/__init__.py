"""CLI tools for bases-bridge."""
