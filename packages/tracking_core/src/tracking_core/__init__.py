"""
Tracking Core - dispatch tracking relay

Consumes order dispatch lifecycle events (``dispatch.tracking``) and
republishes them as tracking status updates (``tracking.status``).

It provides:
- Message contracts (envelope, event types, payload models)
- TrackingService, the stateless event-to-status mapping
- Redis Streams producer/consumer
- The listener that feeds stream messages to the service
"""
