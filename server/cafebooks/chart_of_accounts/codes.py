CASH_ON_HAND = "1010"
BANK = "1020"
SNAPPFOOD_RECEIVABLE = "1030"
TAPSIFOOD_RECEIVABLE = "1040"
FOODEX_RECEIVABLE = "1050"
EMPLOYEE_RECEIVABLE = "1060"
ACCOUNTS_RECEIVABLE = "1070"

ACCOUNTS_PAYABLE = "2010"
DEFERRED_SUBSCRIPTION_REVENUE = "2020"
LOANS_PAYABLE = "2030"

OWNER_CAPITAL = "3010"

CAFE_REVENUE = "4010"
SUBSCRIPTION_REVENUE = "4020"
ASSESSMENT_REVENUE = "4030"

RAW_MATERIALS_EXPENSE = "5010"
SALARY_EXPENSE = "5050"
COURIER_SALARY_EXPENSE = "5051"
LOAN_INTEREST_EXPENSE = "5070"
SALES_DISCOUNTS = "5110"
SALES_RETURNS = "5120"

CASH_BALANCE_CODES = (CASH_ON_HAND, BANK)

DEFAULT_ACCOUNTS = [
    (CASH_ON_HAND, "موجودی نقد (صندوق)", "ASSET"),
    (BANK, "حساب بانکی", "ASSET"),
    (SNAPPFOOD_RECEIVABLE, "طلب از اسنپ‌فود", "ASSET"),
    (TAPSIFOOD_RECEIVABLE, "طلب از تپسی‌فود", "ASSET"),
    (FOODEX_RECEIVABLE, "طلب از فودکس", "ASSET"),
    (EMPLOYEE_RECEIVABLE, "حساب‌های دریافتنی پرسنل", "ASSET"),
    (ACCOUNTS_RECEIVABLE, "حساب‌های دریافتنی", "ASSET"),
    (ACCOUNTS_PAYABLE, "حساب‌های پرداختنی", "LIABILITY"),
    (DEFERRED_SUBSCRIPTION_REVENUE, "پیش‌دریافت درآمد اشتراک", "LIABILITY"),
    (LOANS_PAYABLE, "تسهیلات دریافتی", "LIABILITY"),
    (OWNER_CAPITAL, "سرمایه اولیه", "EQUITY"),
    (CAFE_REVENUE, "درآمد کافه", "REVENUE"),
    (SUBSCRIPTION_REVENUE, "درآمد تحقق‌یافته اشتراک", "REVENUE"),
    (ASSESSMENT_REVENUE, "درآمد مشاوره تغذیه", "REVENUE"),
    (RAW_MATERIALS_EXPENSE, "هزینه مواد اولیه", "EXPENSE"),
    ("5020", "هزینه آب و برق", "EXPENSE"),
    ("5030", "ملزومات اداری", "EXPENSE"),
    ("5040", "هزینه اجاره", "EXPENSE"),
    (SALARY_EXPENSE, "هزینه حقوق و دستمزد", "EXPENSE"),
    (COURIER_SALARY_EXPENSE, "هزینه حقوق پیک", "EXPENSE"),
    ("5060", "بیمه", "EXPENSE"),
    (LOAN_INTEREST_EXPENSE, "هزینه سود تسهیلات", "EXPENSE"),
    (SALES_DISCOUNTS, "تخفیفات فروش", "EXPENSE"),
    (SALES_RETURNS, "برگشت از فروش", "EXPENSE"),
]
