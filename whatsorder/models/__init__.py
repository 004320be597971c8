from whatsorder.models.business import Business
from whatsorder.models.category import Category
from whatsorder.models.product import Product
from whatsorder.models.service import Service
from whatsorder.models.order import Order
from whatsorder.models.profile import Profile
