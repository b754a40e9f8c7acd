"""API route modules.

Public:
- health: service health
- packages: catalog browsing
- home_config: site content

Signed-in users:
- users: current user and profile
- bookings: customer bookings
- payments: customer payment history

Admin (gated by require_admin):
- admin_bookings, admin_packages, admin_users, admin_site
"""
