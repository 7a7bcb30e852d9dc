"""Branch billing service: invoice pricing and branch/client reporting."""
