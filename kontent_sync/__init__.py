"""
CSV to Kontent.ai localized content synchronization service
"""
