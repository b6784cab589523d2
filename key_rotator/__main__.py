from key_rotator.rotate import main

main()
