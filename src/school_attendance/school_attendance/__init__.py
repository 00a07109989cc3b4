"""School attendance package.

Organized by feature modules (identity, enrollment, attendance, scanner,
sync, ...) with a thin Flask controller layer over service/repository layers.
The scanner modules run on the scanning device; everything else is the
canonical store.
"""
