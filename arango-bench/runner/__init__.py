"""
Scenario driver.
"""
