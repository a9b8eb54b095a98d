# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""External service integrations.

- upload: Image host client for school logos and class images
"""
