"""SchoolHub Backend.

Multi-tenant school management: schools, classes, course content
modules, academic structure generation and administration join requests.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
