# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer for SchoolHub.

This package contains domain services that encapsulate business logic.

Domains:
    school: Schools, invitation codes, academic structure, join requests.
    class_: Classes, class images and class code visibility.
"""
