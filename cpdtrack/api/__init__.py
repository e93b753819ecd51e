"""
cpdtrack API Package
====================

FastAPI application exposing rule resolution, benchmarking and firm
risk views.

Author: cpdtrack Team
Version: 1.0.0
"""
