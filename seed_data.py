"""Demo records the store is seeded with on startup and on reset()."""
from datetime import date

from schemas import Car, Customer, Lead, Quotation, Receipt, RevenuePoint

MOCK_CUSTOMERS = [
    Customer(
        id="cust1",
        name="Ahmed Al-Mansoor",
        email="ahmed.m@example.com",
        phone="+971 50 123 4567",
        status="Verified",
        notes="VIP customer, interested in SUVs.",
        joined_date=date(2023, 10, 1),
    ),
    Customer(
        id="cust2",
        name="John Smith",
        email="john.smith@example.com",
        phone="+971 55 987 6543",
        status="Pending Verification",
        notes="Looking for a sedan for daily commute.",
        joined_date=date(2023, 10, 15),
    ),
    Customer(
        id="cust3",
        name="Fatima Khaled",
        email="fatima.k@example.com",
        phone="+971 52 555 1234",
        status="Verified",
        notes="Returning customer.",
        joined_date=date(2023, 10, 20),
    ),
]

_UNSPLASH = "https://images.unsplash.com/photo-{}?auto=format&fit=crop&q=80&w=800"

MOCK_CARS = [
    Car(
        id="car1", make="Toyota", model="Land Cruiser", year=2022, mileage=15000, price=310000,
        status="Available", condition="Excellent",
        description="VXR Twin Turbo, White exterior, Beige interior. Full option with dealer warranty remaining.",
        image_url=_UNSPLASH.format("1594502184342-28f377407278"),
        vin="JT1122334455",
    ),
    Car(
        id="car2", make="BMW", model="X5 M50i", year=2023, mileage=5000, price=385000,
        status="Reserved", condition="Like New",
        description="M Sport package, Carbon Black metallic, Tartufo Merino leather. Panoramic sunroof.",
        image_url=_UNSPLASH.format("1555215695-3004980adade"),
    ),
    Car(
        id="car3", make="Mercedes-Benz", model="G 63 AMG", year=2021, mileage=25000, price=750000,
        status="Available", condition="Excellent",
        description="Night Package, Matte Black wrap, Red interior. Full service history with agency.",
        image_url=_UNSPLASH.format("1520031441872-26514dd970c3"),
    ),
    Car(
        id="car4", make="Nissan", model="Patrol Platinum", year=2024, mileage=1200, price=345000,
        status="Available", condition="Like New",
        description="V8 engine, City Gold exterior. Zero accidents, first owner vehicle.",
        image_url=_UNSPLASH.format("1626847037657-fd3622613ce3"),
    ),
    Car(
        id="car5", make="Porsche", model="911 Carrera S", year=2020, mileage=18000, price=520000,
        status="Sold", condition="Excellent",
        description="Guards Red, Sports Chrono Package, RS Spyder wheels.",
        image_url=_UNSPLASH.format("1503376763036-066120622c74"),
    ),
    Car(
        id="car6", make="Range Rover", model="Autobiography", year=2023, mileage=8500, price=890000,
        status="Available", condition="Like New",
        description="Long Wheelbase, Charente Grey, Perlino interior. Executive rear seating.",
        image_url=_UNSPLASH.format("1606220838315-056192d5e927"),
    ),
    Car(
        id="car7", make="Audi", model="RS Q8", year=2022, mileage=22000, price=595000,
        status="Available", condition="Excellent",
        description="Mythos Black, Carbon Ceramic brakes, Bang & Olufsen 3D Advanced Sound System.",
        image_url=_UNSPLASH.format("1614200187524-dc4b392e4c49"),
    ),
]

MOCK_LEADS = [
    Lead(
        id="lead1",
        name="Michael Chen",
        email="m.chen@example.com",
        phone="+971 50 999 8888",
        status="New",
        interested_in_id="car1",
        last_contact=date(2023, 10, 28),
    ),
    Lead(
        id="lead2",
        name="Sarah Jones",
        email="sarah.j@example.com",
        phone="+971 52 777 6666",
        status="Contacted",
        interested_in_id="car2",
        last_contact=date(2023, 10, 27),
    ),
]

MOCK_QUOTATIONS = [
    Quotation(
        id="q1",
        customer_id="cust1",
        customer_name="Ahmed Al-Mansoor",
        vehicle_make="Toyota",
        vehicle_model="Land Cruiser",
        vehicle_year=2022,
        vin="JT1122334455",
        price=310000,
        date=date(2023, 10, 25),
        status="Sent",
    ),
    Quotation(
        id="q2",
        customer_id="cust2",
        customer_name="John Smith",
        vehicle_make="Nissan",
        vehicle_model="Altima",
        vehicle_year=2020,
        vin="1N4AL3AP0C",
        price=55000,
        date=date(2023, 10, 26),
        status="Draft",
    ),
]

MOCK_RECEIPTS = [
    Receipt(
        id="r1",
        quotation_id="q1",
        customer_name="Ahmed Al-Mansoor",
        amount=310000,
        date=date(2023, 10, 27),
        payment_method="Bank Transfer",
        vehicle_description="2022 Toyota Land Cruiser",
    ),
]

REVENUE_DATA = [
    RevenuePoint(month="Jan", revenue=450000),
    RevenuePoint(month="Feb", revenue=320000),
    RevenuePoint(month="Mar", revenue=550000),
    RevenuePoint(month="Apr", revenue=400000),
    RevenuePoint(month="May", revenue=600000),
    RevenuePoint(month="Jun", revenue=750000),
]
