"""
cpdtrack Shared Package
=======================

Record and response contracts shared by the core and its callers.

Author: cpdtrack Team
Version: 1.0.0
"""
