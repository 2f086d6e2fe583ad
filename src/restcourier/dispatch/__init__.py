# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Calling conventions layered over the shared retry loop."""

from .callback import CallbackDispatcher
from .event import EventDispatcher
from .stream import SingleStream, StreamDispatcher, log_and_swallow
from .sync import SyncDispatcher

__all__ = [
    "CallbackDispatcher",
    "EventDispatcher",
    "SingleStream",
    "StreamDispatcher",
    "SyncDispatcher",
    "log_and_swallow",
]
