# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Middleware package for request processing.

This package contains middleware components for authentication, validation
error formatting, error handling and CORS in the Carteirinha Pet API.
"""
