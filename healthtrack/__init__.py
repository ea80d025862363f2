# -*- coding: utf-8 -*-
"""healthtrack — personal nutrition tracker backend."""

__version__ = "0.1.0"
