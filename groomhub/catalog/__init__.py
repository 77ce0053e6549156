"""
Catalogue reads around the discovery listings.

Responsibilities:
- Provider detail pages (salon, independent professional).
- Salon service menus grouped by category.
- Category browsing.
- Administrator salon listing and verification.
"""
