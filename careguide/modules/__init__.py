"""Business modules for careguide.

Each module is self-contained with its own schemas, services and
domain logic, built on the shared infrastructure packages.
"""
