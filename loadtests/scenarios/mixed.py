"""Mixed storefront workload scenario.

Combines buyer, seller and admin journeys with weights that model
realistic storefront traffic. This is the recommended scenario for load
baseline testing.
"""

from locust import HttpUser, between

from loadtests.scenarios.fulfillment import AdminMonitorJourney, OrderFulfillmentJourney
from loadtests.scenarios.shopping import CartBrowsingJourney, CheckoutAndPayJourney, OrderCancellationJourney


class MixedWorkloadUser(HttpUser):
    """Realistic mixed workload.

    Buyers (80%):
    - Cart browsing and abandonment: most common
    - Checkout and payment: conversion
    - Cancellation: unhappy path

    Sellers and admins (20%):
    - Fulfillment through delivery
    - Dashboard polling
    """

    wait_time = between(0.5, 2.0)

    tasks = {
        CartBrowsingJourney: 40,
        CheckoutAndPayJourney: 30,
        OrderCancellationJourney: 10,
        OrderFulfillmentJourney: 15,
        AdminMonitorJourney: 5,
    }
