"""
Software catalog access: entity references, annotations and the catalog client.
"""
