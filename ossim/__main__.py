# -*- coding: utf-8 -*-
from .simulation import main

if __name__ == '__main__':
    main()
