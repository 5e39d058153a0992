# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Domain logic package for the Carteirinha Pet platform.

This package contains pure business logic functions with no side effects.
All domain functions are pure and testable without external dependencies;
the current date is always passed in by the caller.
"""
