#!/usr/bin/env python3
"""
Background worker hosting one RDSDecoder.

The decoder is not thread-safe, so it lives on its own thread and is
driven only through messages, processed one at a time in arrival order:

    {'type': 'parse', 'data': <raw record text>}   -> {'type': 'parsed'}
    {'type': 'getData'}                            -> {'type': 'data', **snapshot}

Replies are queued in the same order the commands were posted.
"""

import logging
import queue
import threading

from rds_decoder import RDSDecoder

logger = logging.getLogger(__name__)

MSG_PARSE = 'parse'
MSG_PARSED = 'parsed'
MSG_GET_DATA = 'getData'
MSG_DATA = 'data'

COMMANDS = (MSG_PARSE, MSG_GET_DATA)

_STOP = object()


class RDSWorker:
    """Actor wrapper around RDSDecoder."""

    REPLY_TIMEOUT_S = 5.0

    def __init__(self, decoder=None, config=None):
        self.decoder = decoder or RDSDecoder(config=config)
        self._inbox = queue.Queue()
        self._outbox = queue.Queue()
        self._thread = None
        self._running = False
        self._lock = threading.Lock()

    def start(self):
        with self._lock:
            if self._running:
                return
            self._running = True
            self._thread = threading.Thread(target=self._run, name='rds-worker', daemon=True)
            self._thread.start()

    def stop(self, timeout=None):
        """Stop after the commands already posted have been handled."""
        with self._lock:
            if not self._running:
                return
            self._running = False
            thread = self._thread
            self._thread = None
        self._inbox.put(_STOP)
        thread.join(timeout)

    @property
    def is_running(self):
        with self._lock:
            return self._running

    def post(self, message):
        """Queue a command. Raises ValueError for anything outside the command set."""
        msg_type = message.get('type') if isinstance(message, dict) else None
        if msg_type not in COMMANDS:
            raise ValueError(f"unknown worker command: {msg_type!r}")
        if msg_type == MSG_PARSE and not isinstance(message.get('data'), str):
            raise ValueError("parse command needs a 'data' string")
        self._inbox.put(message)

    def get_reply(self, timeout=None):
        """Next reply in command order; raises queue.Empty on timeout."""
        return self._outbox.get(timeout=timeout)

    def parse(self, data, timeout=REPLY_TIMEOUT_S):
        """Post raw records and wait until they have been decoded."""
        self.post({'type': MSG_PARSE, 'data': data})
        return self._wait(MSG_PARSED, timeout)

    def get_data(self, timeout=REPLY_TIMEOUT_S):
        """Request a snapshot and wait for it."""
        self.post({'type': MSG_GET_DATA})
        return self._wait(MSG_DATA, timeout)

    def _wait(self, reply_type, timeout):
        # Replies to earlier post() calls nobody collected are dropped here
        while True:
            try:
                reply = self._outbox.get(timeout=timeout)
            except queue.Empty:
                raise TimeoutError(f"no '{reply_type}' reply within {timeout}s") from None
            if reply['type'] == reply_type:
                return reply

    def handle(self, message):
        """Process one command synchronously and return its reply."""
        if message['type'] == MSG_PARSE:
            self.decoder.parse_message(message['data'])
            return {'type': MSG_PARSED}
        return {'type': MSG_DATA, **self.decoder.snapshot()}

    def _run(self):
        while True:
            message = self._inbox.get()
            if message is _STOP:
                break
            self._outbox.put(self.handle(message))
        logger.debug("RDS worker stopped")
