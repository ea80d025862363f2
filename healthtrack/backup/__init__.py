# -*- coding: utf-8 -*-
"""Best-effort remote backup of meal photos."""
