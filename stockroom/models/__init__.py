# Users
from stockroom.models.users.user_models import User

# Masters
from stockroom.models.masters.category_models import Category
from stockroom.models.masters.product_models import Product
from stockroom.models.masters.warehouse_models import Warehouse

# Inventory
from stockroom.models.inventory.stock_balance_models import StockBalance
from stockroom.models.inventory.stock_transaction_models import StockTransaction
from stockroom.models.inventory.immutability import register_immutability_listeners

register_immutability_listeners()
