"""
Sales analytics: top/bottom seller ranking with article image URLs.
"""
