# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""User identity service: registration, activation, login and session lookup."""

__version__ = "0.1.0"
