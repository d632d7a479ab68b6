# app/constants/pagination.py

PAGE_SIZES = (10, 25, 50, 100)
