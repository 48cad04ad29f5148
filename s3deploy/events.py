"""
Deployment lifecycle events

Components receive an EventPublisher and call publish(); delivery is
fire-and-forget and a deployment never depends on a subscriber existing.
"""
from s3deploy import utils
from s3deploy.logger import log

BEFORE_SITE_DEPLOY = 'before:site-deploy'
AFTER_SITE_DEPLOY = 'after:site-deploy'
BEFORE_UPLOAD = 'before:upload'
AFTER_UPLOAD = 'after:upload'
BEFORE_INVALIDATION = 'before:invalidation'
AFTER_INVALIDATION = 'after:invalidation'
DEPLOYMENT_PROGRESS = 'deployment:progress'
BEFORE_STACK_INSPECTION = 'before:stack-inspection'
AFTER_STACK_INSPECTION = 'after:stack-inspection'
STACK_INSPECTION_FAILED = 'stack:inspection:failed'

STAGE_UPLOADING = 'uploading'
STAGE_INVALIDATING = 'invalidating'
STAGE_COMPLETED = 'completed'


class Event(object):
    def __init__(self, event_type, payload, timestamp=None):
        self.event_type = event_type
        self.payload = payload
        self.timestamp = timestamp or utils.utc_now()

    def __repr__(self):
        return '<Event: %s %s>' % (self.event_type, self.payload)


class EventPublisher(object):
    def __init__(self, subscribers=None):
        self._subscribers = list(subscribers or [])

    def subscribe(self, callback):
        """
        Register callback(event) to receive every published Event
        """
        if callback not in self._subscribers:
            self._subscribers.append(callback)
        return callback

    def unsubscribe(self, callback):
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def publish(self, event_type, **payload):
        event = Event(event_type, payload)
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception as e:
                log.warning("event subscriber %r failed on %s: %s" %
                            (callback, event_type, e))
        return event

    def progress(self, site, stage, progress, message):
        return self.publish(DEPLOYMENT_PROGRESS, site=site, stage=stage,
                            progress=progress, message=message)


class EventRecorder(object):
    """
    Subscriber that keeps every event it receives
    """
    def __init__(self):
        self.events = []

    def __call__(self, event):
        self.events.append(event)

    def of_type(self, event_type):
        return [e for e in self.events if e.event_type == event_type]
