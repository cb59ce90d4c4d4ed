"""RTP, SCTP and SRTP models, worker binary lookup and transport state for an SFU worker."""

__version__ = "0.1.0"