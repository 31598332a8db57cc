"""
Signature placement feature.

Places signature images on PDF pages through a percentage-based geometry
store, a pointer-driven drag/resize controller, and an overlay merge step
that re-projects the stored geometry into PDF page space on save.
"""
