from __future__ import annotations

import random
from datetime import date, time
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from modules.accounts.constants import ActorRole
from modules.accounts.models import UserProfile
from modules.accounts.scope import ActorScope
from modules.branches.constants import StaffRole
from modules.branches.models import Branch, BranchHoliday, Staff
from modules.logistics.models import LogisticsPartner
from modules.orders.constants import LogisticsLeg, OrderStatus
from modules.orders.dtos import (
    AssignBranchDTO,
    AssignLogisticsDTO,
    AssignStaffDTO,
    PlaceOrderDTO,
    TransitionStatusDTO,
)
from modules.orders.models import Order
from modules.orders.services import build_workflow_service

# Each seeded order is driven through the real workflow up to one of these.
TARGET_STATUSES = [
    OrderStatus.PLACED,
    OrderStatus.ASSIGNED_TO_BRANCH,
    OrderStatus.ASSIGNED_TO_LOGISTICS_PICKUP,
    OrderStatus.IN_PROCESS,
    OrderStatus.READY,
    OrderStatus.OUT_FOR_DELIVERY,
    OrderStatus.DELIVERED,
    OrderStatus.CANCELLED,
]

PINCODES = ["560001", "560002", "560034", "560095"]


class Command(BaseCommand):
    help = "Seed database with realistic development data."

    def add_arguments(self, parser):
        parser.add_argument("--orders", type=int, default=16)

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        branches = self._seed_branches()
        users = self._seed_users(branches[0])
        staff = self._seed_staff(branches)
        partners = self._seed_partners()
        orders_created = self._seed_orders(users, branches[0], partners, options["orders"])

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={len(users)}, "
                f"branches={len(branches)}, "
                f"staff={len(staff)}, "
                f"partners={len(partners)}, "
                f"orders={orders_created}"
            )
        )

    def _seed_users(self, branch: Branch) -> dict[str, object]:
        self.stdout.write("Creating users...")
        User = get_user_model()
        accounts = [
            ("admin", ActorRole.ADMIN, None),
            ("center", ActorRole.CENTER_ADMIN, None),
            ("manager", ActorRole.BRANCH_MANAGER, branch),
            ("washer", ActorRole.STAFF, branch),
            ("support", ActorRole.SUPPORT_AGENT, None),
            ("priya", ActorRole.CUSTOMER, None),
            ("rahul", ActorRole.CUSTOMER, None),
        ]
        users: dict[str, object] = {}
        for username, role, assigned_branch in accounts:
            user = User.objects.filter(username=username).first()
            if user is None:
                user = User.objects.create_user(
                    username,
                    password=f"{username}123",
                    is_staff=role in (ActorRole.ADMIN, ActorRole.CENTER_ADMIN),
                )
            UserProfile.objects.update_or_create(
                user=user,
                defaults={"role": role, "assigned_branch": assigned_branch},
            )
            users[username] = user
        self.stdout.write(self.style.SUCCESS("Creating users... Done!"))
        return users

    def _seed_branches(self) -> list[Branch]:
        self.stdout.write("Creating branches...")
        catalog = [
            ("Indiranagar", "BLR-IND", "560038"),
            ("Koramangala", "BLR-KOR", "560034"),
        ]
        branches: list[Branch] = []
        for name, code, pincode in catalog:
            branch, _ = Branch.objects.get_or_create(
                code=code,
                defaults={
                    "name": name,
                    "address_line": f"12 Main Road, {name}",
                    "city": "Bengaluru",
                    "pincode": pincode,
                    "contact_phone": "08041234567",
                    "contact_email": f"{code.lower()}@laundry.example.com",
                    "open_time": time(8, 0),
                    "close_time": time(20, 0),
                },
            )
            branches.append(branch)
        BranchHoliday.objects.get_or_create(
            branch=branches[1],
            date=date(2000, 1, 26),
            defaults={"reason": "Republic Day", "is_recurring": True},
        )
        self.stdout.write(self.style.SUCCESS("Creating branches... Done!"))
        return branches

    def _seed_staff(self, branches: list[Branch]) -> list[Staff]:
        self.stdout.write("Creating staff...")
        roster = [
            ("Suresh Kumar", "9800000001", StaffRole.WASHER),
            ("Lakshmi Devi", "9800000002", StaffRole.IRONER),
        ]
        staff: list[Staff] = []
        for index, branch in enumerate(branches):
            for name, phone, role in roster:
                member, _ = Staff.objects.get_or_create(
                    phone=f"{phone[:-1]}{index * 2 + int(phone[-1])}",
                    defaults={"name": name, "branch": branch, "role": role},
                )
                staff.append(member)
        self.stdout.write(self.style.SUCCESS("Creating staff... Done!"))
        return staff

    def _seed_partners(self) -> list[LogisticsPartner]:
        self.stdout.write("Creating logistics partners...")
        catalog = [
            ("QuickShip Logistics", "Anil Rao", "9900000001", PINCODES),
            ("CityDash Couriers", "Meera Nair", "9900000002", PINCODES[:2]),
        ]
        partners: list[LogisticsPartner] = []
        for company, contact, phone, pincodes in catalog:
            partner, _ = LogisticsPartner.objects.get_or_create(
                company_name=company,
                defaults={
                    "contact_person": contact,
                    "phone": phone,
                    "serviceable_pincodes": pincodes,
                },
            )
            partners.append(partner)
        self.stdout.write(self.style.SUCCESS("Creating logistics partners... Done!"))
        return partners

    def _seed_orders(
        self,
        users: dict[str, object],
        branch: Branch,
        partners: list[LogisticsPartner],
        count: int,
    ) -> int:
        self.stdout.write("Creating orders...")
        if Order.objects.exists():
            self.stdout.write(self.style.WARNING("Skipping orders (already seeded)."))
            return 0

        service = build_workflow_service()
        admin = ActorScope.for_user(users["admin"])
        manager = ActorScope.for_user(users["manager"])
        customers = [users["priya"], users["rahul"]]
        washer = Staff.objects.filter(branch=branch, role=StaffRole.WASHER).first()

        for i in range(count):
            customer = ActorScope.for_user(random.choice(customers))
            target = TARGET_STATUSES[i % len(TARGET_STATUSES)]
            with transaction.atomic():
                order = service.place_order(
                    PlaceOrderDTO(
                        pickup_address=f"{i + 1} 100 Feet Road, Bengaluru",
                        pickup_pincode=random.choice(PINCODES[:2]),
                        delivery_address=f"{i + 1} 100 Feet Road, Bengaluru",
                        delivery_pincode=random.choice(PINCODES[:2]),
                        total_amount=Decimal(random.randint(150, 1500)),
                        total_weight_kg=Decimal(random.randint(2, 12)),
                        is_express=i % 5 == 0,
                        notes=f"Seed order {i + 1}",
                    ),
                    customer,
                )
                self._advance(service, order.id, target, admin, manager, partners, washer)
        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return count

    def _advance(self, service, order_id, target, admin, manager, partners, washer) -> None:
        if target == OrderStatus.PLACED:
            return
        if target == OrderStatus.CANCELLED:
            service.transition_status(
                TransitionStatusDTO(order_id=order_id, status=target, notes="Customer changed plans"),
                admin,
            )
            return

        service.assign_branch(
            AssignBranchDTO(order_id=order_id, branch_id=manager.owned_branch_id), admin
        )
        steps = [
            OrderStatus.ASSIGNED_TO_LOGISTICS_PICKUP,
            OrderStatus.PICKED,
            OrderStatus.IN_PROCESS,
            OrderStatus.READY,
            OrderStatus.ASSIGNED_TO_LOGISTICS_DELIVERY,
            OrderStatus.OUT_FOR_DELIVERY,
            OrderStatus.DELIVERED,
        ]
        for step in steps:
            if target == OrderStatus.ASSIGNED_TO_BRANCH:
                return
            if step == OrderStatus.ASSIGNED_TO_LOGISTICS_PICKUP:
                service.assign_logistics(
                    AssignLogisticsDTO(
                        order_id=order_id,
                        logistics_partner_id=partners[0].id,
                        leg=LogisticsLeg.PICKUP,
                    ),
                    admin,
                )
            elif step == OrderStatus.ASSIGNED_TO_LOGISTICS_DELIVERY:
                service.assign_logistics(
                    AssignLogisticsDTO(
                        order_id=order_id,
                        logistics_partner_id=partners[0].id,
                        leg=LogisticsLeg.DELIVERY,
                    ),
                    manager,
                )
            else:
                service.transition_status(
                    TransitionStatusDTO(order_id=order_id, status=step), manager
                )
            if step == OrderStatus.PICKED and washer is not None:
                self._assign_if_free(service, order_id, washer, manager)
            if step == target:
                return

    @staticmethod
    def _assign_if_free(service, order_id, washer, manager) -> None:
        if washer.current_orders.count() < washer.max_concurrent_orders:
            service.assign_staff(AssignStaffDTO(order_id=order_id, staff_id=washer.id), manager)
