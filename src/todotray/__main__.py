from todotray.app import main

main()
