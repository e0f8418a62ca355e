"""
Domain services: typed façades over one backend resource area each.

Failure contract per operation (see integrations/policy/failure_policy.py):

| Operation                                   | Policy    | On failure                  |
|---------------------------------------------|-----------|-----------------------------|
| FarmerService.get_farmer_by_id              | ABSORB    | None                        |
| FarmerService.get_farmer_products           | ABSORB    | []                          |
| FarmerService.get_all_farmers               | ABSORB    | []                          |
| FarmerService.update_farmer_phone           | REPORT    | OperationResult(False, msg) |
| OrderService.get_orders                     | ABSORB    | []                          |
| OrderService.place_order                    | PROPAGATE | OperationFailed             |
| OrderService.cancel_order                   | PROPAGATE | OperationFailed             |
| FarmerOrderService.get_farmer_orders        | ABSORB    | [] (401/403 raise)          |
| FarmerOrderService.get_farmer_stats         | ABSORB    | zeroed FarmerStats          |
| FarmerOrderService.get_farmer_order_details | PROPAGATE | OperationFailed             |
| FarmerOrderService.update_order_status      | PROPAGATE | OperationFailed             |
| CartService.get_cart                        | ABSORB    | []                          |
| CartService.add/update/remove/clear         | PROPAGATE | OperationFailed             |
| AuthService.register / login                | PROPAGATE | OperationFailed             |
| AuthService.get_current_user                | ABSORB    | None                        |
| AuthService.change_password                 | PROPAGATE | OperationFailed             |
| AuthService.logout                          | (none)    | server failure only logged  |
| UserService.get_user_profile                | ABSORB    | None                        |
| UserService.update_profile                  | PROPAGATE | OperationFailed             |
"""

from .auth_service import AuthService
from .cart_service import CartService
from .farmer_order_service import FarmerOrderService
from .farmer_service import FarmerService
from .order_service import OrderService
from .user_service import UserService

__all__ = ["AuthService", "CartService", "FarmerOrderService", "FarmerService", "OrderService", "UserService"]
