"""
Article image storage: key layout, URL resolvers, batch resolution.
"""
