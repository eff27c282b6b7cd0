"""Built-in Axiz catalog served when the real API is unavailable."""

DEMO_PRODUCTS = [
    # Dell laptops
    {"sku": "85B44EA", "name": 'Dell Latitude 5430 14" Laptop', "brand": "Dell", "category": "laptop",
     "description": 'Dell Latitude 5430 14" FHD Business Laptop - Intel Core i5-1235U, 16GB RAM, 512GB SSD, Windows 11 Pro',
     "price": 18999.00, "stock_quantity": 12},
    {"sku": "81A38EA", "name": "Dell XPS 13 Plus 9320", "brand": "Dell", "category": "laptop",
     "description": 'Dell XPS 13 Plus 9320 - 13.4" OLED 3.5K Touch, Intel Core i7-1260P, 16GB RAM, 512GB SSD',
     "price": 34999.00, "stock_quantity": 8},
    {"sku": "85B45EA", "name": "Dell Inspiron 15 3520", "brand": "Dell", "category": "laptop",
     "description": 'Dell Inspiron 15 3520 - 15.6" FHD, Intel Core i5-1235U, 8GB RAM, 512GB SSD, Windows 11',
     "price": 12999.00, "stock_quantity": 24},
    {"sku": "85B66EA", "name": "Dell Inspiron 14 5420", "brand": "Dell", "category": "laptop",
     "description": 'Dell Inspiron 14 5420 - 14" FHD, Intel Core i5-1240P, 16GB RAM, 512GB SSD, Windows 11',
     "price": 14999.00, "stock_quantity": 16},
    {"sku": "85B71EA", "name": "Dell Inspiron 15 3000", "brand": "Dell", "category": "laptop",
     "description": 'Dell Inspiron 15 3000 - 15.6" FHD, Intel Celeron N4020, 4GB RAM, 128GB SSD, Windows 11',
     "price": 7999.00, "stock_quantity": 45},
    {"sku": "5F7N5ES", "name": "Dell Precision 3580 Workstation", "brand": "Dell", "category": "laptop",
     "description": 'Dell Precision 3580 Mobile Workstation - 15.6" FHD, Intel Core i7-13800H, 32GB RAM, 1TB SSD, NVIDIA RTX A500',
     "price": 54999.00, "stock_quantity": 5},
    {"sku": "85B47EA", "name": 'Dell Vostro 3520 15.6" Laptop', "brand": "Dell", "category": "laptop",
     "description": 'Dell Vostro 3520 15.6" FHD Laptop - Intel Core i7-1255U, 16GB RAM, 512GB SSD, Windows 11 Pro',
     "price": 18999.00, "stock_quantity": 15},
    {"sku": "85B60EA", "name": "Dell Precision 5570 Workstation", "brand": "Dell", "category": "laptop",
     "description": 'Dell Precision 5570 Mobile Workstation - 15.6" FHD, Intel Core i7-12800H, 32GB RAM, 1TB SSD, NVIDIA RTX A2000',
     "price": 59999.00, "stock_quantity": 4},
    # Dell monitors
    {"sku": "884V6EA", "name": 'Dell UltraSharp U2723DE 27" 4K Monitor', "brand": "Dell", "category": "monitor",
     "description": 'Dell UltraSharp U2723DE 27" 4K UHD IPS Monitor with USB-C, HDMI, DisplayPort',
     "price": 12999.00, "stock_quantity": 18},
    {"sku": "6B2T6EA", "name": 'Dell P2723DE 27" QHD Monitor', "brand": "Dell", "category": "monitor",
     "description": 'Dell P2723DE 27" QHD IPS Monitor with USB-C Hub, Height Adjustable Stand',
     "price": 8999.00, "stock_quantity": 32},
    {"sku": "85B58EA", "name": 'Dell P2422H 24" FHD Monitor', "brand": "Dell", "category": "monitor",
     "description": 'Dell P2422H 24" FHD IPS Monitor with VGA, HDMI, DisplayPort, Height Adjustable Stand',
     "price": 3999.00, "stock_quantity": 58},
    # Dell desktops
    {"sku": "6S7V0EA", "name": "Dell OptiPlex 7010 SFF Desktop", "brand": "Dell", "category": "desktop",
     "description": "Dell OptiPlex 7010 Small Form Factor - Intel Core i5-13500, 16GB RAM, 512GB SSD, Windows 11 Pro",
     "price": 16999.00, "stock_quantity": 15},
    {"sku": "6S7U8EA", "name": "Dell Vostro 3020 Desktop", "brand": "Dell", "category": "desktop",
     "description": "Dell Vostro 3020 Desktop - Intel Core i5-12400, 8GB RAM, 256GB SSD, Windows 11 Pro",
     "price": 11999.00, "stock_quantity": 22},
    # Dell accessories
    {"sku": "85B51EA", "name": "Dell USB-C Hub WD19TB", "brand": "Dell", "category": "accessories",
     "description": "Dell USB-C Hub WD19TB - Thunderbolt 3 Docking Station with 180W Power Delivery",
     "price": 6999.00, "stock_quantity": 45},
    {"sku": "85B52EA", "name": "Dell KM5221W Wireless Keyboard & Mouse", "brand": "Dell", "category": "accessories",
     "description": "Dell KM5221W Wireless Keyboard and Mouse Combo with 2.4GHz and Bluetooth connectivity",
     "price": 1299.00, "stock_quantity": 67},
    # HP
    {"sku": "HP85B44EA", "name": "HP Elitebook 650 G10", "brand": "HPIC", "category": "laptop",
     "description": "HP Elitebook 650 G10 - Core i7-1355U 16GB (1x16GB) DDR4 512GB PCIe NVMe 15.6 FHD UWVA 250 WWAN HDC IR",
     "price": 20352.45, "stock_quantity": 10},
    {"sku": "HP81A38EA", "name": "HP EliteBook 830 G10 LTE", "brand": "HPIC", "category": "laptop",
     "description": "HP EliteBook 830 G10 LTE - Core i5-1335U 16GB (1x16GB) DDR4 512GB PCIe NVMe 13.3 WUXGA Windows 11 Pro 64",
     "price": 25306.18, "stock_quantity": 38},
    {"sku": "HP884V6EA", "name": "HP ProOne 440 G9 23.8 Touch AiO", "brand": "HPIC", "category": "aio (all in one)",
     "description": "HP ProOne 440 G9 23.8 Touch AiO - Core i7-13700T 16GB DDR4 3200 512GB PCIe NVMe 23.8 inch Touch AiO",
     "price": 19913.93, "stock_quantity": 2},
    {"sku": "HP6S7V0EA", "name": "HP 250 G9 Notebook", "brand": "HPIC", "category": "laptop",
     "description": "HP 250 G9 Notebook Core i3-1215U 8GB (1x8GB) 1D DDR4 256GB PCIe NVMe 15.6 FHD AG SVA 250 WWAN",
     "price": 6499.30, "stock_quantity": 0},
    {"sku": "HP5F7N5ES", "name": "HP Z1 Entry Tower G9 IDS", "brand": "HPIC", "category": "workstation",
     "description": "HP Z1 Entry Tower G9 IDS- Intel i9-12900 2.40G 16 cores 65W ECC 32GB (2x16GB) DDR5 1TB PCIe-4x4 2280 NVMe",
     "price": 40680.48, "stock_quantity": 2},
    {"sku": "HP6B2T6EA", "name": "HP Pro Tower 290 G9 TWR", "brand": "HPIC", "category": "desktop",
     "description": "HP Pro Tower 290 G9 TWR - Core i7-12700 16GB (1x16GB) 512GB SSD Win11 Pro (Win10 Downgrade) DVD-WR ODD",
     "price": 18378.30, "stock_quantity": 0},
    # Lenovo
    {"sku": "20VYS19E00", "name": "Lenovo ThinkPad E14 Gen 5", "brand": "Lenovo", "category": "laptop",
     "description": 'Lenovo ThinkPad E14 Gen 5 - 14" FHD, AMD Ryzen 5 7530U, 16GB RAM, 512GB SSD, Windows 11 Pro',
     "price": 18999.00, "stock_quantity": 15},
]
