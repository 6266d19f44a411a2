import time
import random
import logging
from botocore.exceptions import ClientError

THROTTLING_CODES = ['Throttling', 'ThrottlingException', 'RequestLimitExceeded', 'TooManyRequestsException']
MAX_DELAY = 30


def retry_throttled(operation, description, max_attempts=5, base_delay=1.2):
    """Call ``operation`` again when AWS throttles it.

    Only used around list-page requests; deletes are never retried.
    """
    for attempt in range(max_attempts):
        try:
            return operation()
        except ClientError as e:
            code = e.response.get('Error', {}).get('Code', '')
            if code not in THROTTLING_CODES or attempt == max_attempts - 1:
                raise
            jitter = random.uniform(0.5, 1.5)
            delay = min(base_delay * (2 ** attempt) * jitter, MAX_DELAY)
            logging.warning(f'{description} throttled ({code}); retrying in {delay:.2f} seconds...')
            time.sleep(delay)
