from uuid import UUID
import datetime
from decimal import Decimal

# --- Directory ---
TEST_ADMIN_ID = UUID('3f1c2a8e-5d4b-4c6a-9e7f-0a1b2c3d4e5f')
TEST_TEACHER_ID = UUID('dcef54de-bc89-4388-a7a8-dba5d8327447')
TEST_OTHER_TEACHER_ID = UUID('6667e14b-f8b7-45ee-998a-48832413d4c7')
TEST_STUDENT_ID = UUID('e46d56d4-a856-49cc-b078-bffa79d9a142')
TEST_UNLINKED_STUDENT_ID = UUID('a6934e55-9538-4c06-a7b0-545fbd4d8cee')
TEST_UNKNOWN_ID = UUID('00000000-0000-0000-0000-00000000dead')

TEST_TEACHER_DEFAULT_PRICE = Decimal("100.00")
TEST_OTHER_TEACHER_DEFAULT_PRICE = Decimal("120.00")
TEST_LINK_PRICE = Decimal("90.00")

TEST_PASSWORD = "testpassword"

# --- Catalog ---
TEST_SUBJECT_ID = UUID('026ce9a5-eded-480f-b98c-a62b459807aa')
TEST_SUBJECT_NAME = "Mathematics"

# --- Ledger scenario (June 2024) ---
TEST_PRESENT_LESSON_ID = UUID('d3bff492-2d0c-4fce-a65b-a58107d125ec')
TEST_ABSENT_LESSON_ID = UUID('8bb36a2a-fed8-4908-a4fa-32ea960a8335')
TEST_PAYMENT_ID = UUID('d5dcf3b2-d166-4fd0-890d-3553bf2eca57')

JUNE_1 = datetime.date(2024, 6, 1)
JUNE_10 = datetime.date(2024, 6, 10)
JUNE_15 = datetime.date(2024, 6, 15)
JUNE_16 = datetime.date(2024, 6, 16)
JUNE_30 = datetime.date(2024, 6, 30)
