# SPDX-FileCopyrightText: 2025 censorcheck contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Package version."""

__all__ = ["__version__"]

__version__ = "1.0.0"
