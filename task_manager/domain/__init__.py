"""Domain-level policies and business rules.

This package contains logic that defines *what* the business rules are
(roles, task statuses, who may act on whom), independent from *where* they are
applied (services, repositories, routers).
"""
