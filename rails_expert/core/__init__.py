"""
Loaders and checks for the marketplace content tree.
"""
