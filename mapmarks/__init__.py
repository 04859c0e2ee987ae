# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""mapmarks: rated, priced location bookmarks on a shared world map."""

__version__ = "0.1.0"
