"""
auth — User authentication module.

Provides:
  • Password hashing (bcrypt, per-hash salt)
  • Opaque access-token generation
  • Register / Login API routes
  • ``get_current_user`` FastAPI dependency
"""
