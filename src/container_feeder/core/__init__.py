"""Image reconciliation and import pipeline"""
