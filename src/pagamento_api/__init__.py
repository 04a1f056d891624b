"""HTTP API for the payment service.

Exposes payment creation/lookup and the Mercado Pago webhook over
FastAPI. Runs under uvicorn locally and under Mangum on AWS Lambda.
"""
