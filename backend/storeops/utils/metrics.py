# /storeops/utils/metrics.py

from prometheus_client import Counter, Histogram

# This file defines all Prometheus metrics used for application monitoring.
# Centralizing them here makes them easy to find and manage.

# Business Logic Metrics
message_counter = Counter('assistant_messages_total', 'Total messages processed', ['status'])
intent_counter = Counter('assistant_intents_total', 'Intents extracted from messages', ['action'])
ai_requests_counter = Counter('ai_requests_total', 'Total AI requests', ['model', 'status'])
commerce_operations_counter = Counter('commerce_operations_total', 'Commerce operations', ['operation', 'mode', 'status'])

# Security Metrics
webhook_signature_counter = Counter('webhook_signature_verifications_total', 'Webhook signature verifications', ['status'])

# Performance Metrics
response_time_histogram = Histogram('response_time_seconds', 'Response time in seconds', ['endpoint'])
