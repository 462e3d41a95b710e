"""Hypotheses pulled from an external ASR service as newline-delimited JSON."""
from __future__ import annotations

import os
import threading
import warnings
from typing import Optional

import requests

from speech_marquee.errors import MalformedEvent, RecognitionTransientError
from .base import EndCallback, ErrorCallback, EventCallback, HypothesisSource, parse_hypothesis

# Configuration for the external ASR service
ASR_STREAM_URL = os.getenv("MARQUEE_ASR_STREAM_URL", "http://localhost:8000/asr/stream")

# (connect, read) timeouts in seconds; reads block until the recognizer speaks
STREAM_TIMEOUT = (5.0, None)


class StreamingHypothesisSource(HypothesisSource):
    """Reads ``{"transcript": ..., "isFinal": ...}`` lines on a background thread.

    Connection problems are reported through ``on_error`` and then end the
    stream, leaving restarts to the session's retry policy. Malformed lines
    are warned about and skipped.
    """

    def __init__(
        self,
        url: str = ASR_STREAM_URL,
        timeout=STREAM_TIMEOUT,
        http: Optional[requests.Session] = None,
    ) -> None:
        super().__init__()
        self.url = url
        self.timeout = timeout
        self._http = http or requests.Session()
        self._stopped = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._response = None

    def start(self, on_event: EventCallback, on_end: EndCallback, on_error: ErrorCallback) -> None:
        if self._thread is not None and self._thread.is_alive():
            raise RecognitionTransientError("ASR stream already running")
        self._bind(on_event, on_end, on_error)
        self._stopped.clear()
        self._thread = threading.Thread(
            target=self._run,
            args=(on_event, on_end, on_error),
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        self._stopped.set()
        self._unbind()
        response = self._response
        if response is not None:
            response.close()

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    def _run(self, on_event: EventCallback, on_end: EndCallback, on_error: ErrorCallback) -> None:
        try:
            with self._http.get(self.url, stream=True, timeout=self.timeout) as response:
                self._response = response
                response.raise_for_status()
                for line in response.iter_lines(decode_unicode=True):
                    if self._stopped.is_set():
                        return
                    if not line:
                        continue
                    try:
                        event = parse_hypothesis(line)
                    except MalformedEvent as e:
                        warnings.warn(str(e))
                        continue
                    on_event(event)
        except requests.exceptions.ConnectionError:
            if not self._stopped.is_set():
                on_error("Could not connect to ASR service (is it running?)")
        except requests.exceptions.RequestException as e:
            if not self._stopped.is_set():
                on_error(f"ASR stream failed: {e}")
        except Exception as e:
            # Closing the response from stop() can break iter_lines mid-read.
            if not self._stopped.is_set():
                on_error(f"ASR stream broke: {e}")
        finally:
            self._response = None
            if not self._stopped.is_set():
                self._unbind()
                on_end()
