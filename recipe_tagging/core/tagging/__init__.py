"""
Hierarchical recipe tags: taxonomy storage, navigation and import.
"""
