# coe_portal/core/__init__.py
"""
Core application modules.
Contains essential infrastructure components:
- bootstrap: Application initialization and default admin creation
- db: Database configuration and connection management
- errors: Domain error taxonomy mapped to HTTP responses
- logging_config: Console logging setup
- policy: Capability and ownership rules
- security: Password hashing and JWT tokens
"""
