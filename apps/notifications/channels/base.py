# apps/notifications/channels/base.py
from collections import namedtuple

# user: the account whose inbox and push subscriptions are used
# name / email: how the recipient is greeted and where email goes
Recipient = namedtuple('Recipient', ['user', 'name', 'email'])
