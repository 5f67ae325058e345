"""
Static lookup data for the auditor: WCAG mappings, fix suggestions and
sample findings used by the offline demo.
"""
