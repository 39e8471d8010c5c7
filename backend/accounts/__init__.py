# accounts/__init__.py
"""
Accounts app - identity and role-based access for Bookwise.

This app provides:
- User: Custom email-login user model
- Roles: Admin / Bookkeeper / ReportViewer as auth groups
- ActorContext: Authorization context utilities
- Identity seeding (roles + bootstrap admin)
"""
